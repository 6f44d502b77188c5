"""Audio capture, transcription and speech synthesis executors."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..contracts import AudioClip, BaseStep, StepResult
from ..errors import UnsupportedCapabilityError, WorkflowError
from ..host.base import AUDIO_CAPTURE, SPEECH_SYNTHESIS, TRANSCRIPTION
from .context import ExecutionContext

logger = logging.getLogger(__name__)


async def audio_input(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    """Package recorded audio, capturing a fresh clip when none was attached."""
    if step.materialized_value:
        clip = AudioClip(
            data=step.materialized_value,
            filename=step.config.filename,
            mime_type=step.config.mime_type,
        )
        return StepResult(output=clip, log="Audio input processed successfully")

    if not ctx.host.supports(AUDIO_CAPTURE):
        raise WorkflowError("No audio data provided to audio input")

    await ctx.host.start_audio_capture()
    await asyncio.sleep(step.config.capture_seconds)
    clip = await ctx.host.stop_audio_capture()
    logger.debug(f"Captured {step.config.capture_seconds}s of audio for {step.id}")
    return StepResult(output=clip, log="Audio captured successfully")


async def transcription(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    if not ctx.host.supports(TRANSCRIPTION):
        raise UnsupportedCapabilityError(
            TRANSCRIPTION,
            f"Speech transcription models are not supported in the {ctx.host.name} host. "
            "Use a host with transcription support instead.",
        )

    if isinstance(upstream, AudioClip):
        clip = upstream
    elif isinstance(upstream, dict):
        clip = AudioClip.model_validate(upstream)
    else:
        clip = None
    if clip is None or not clip.data:
        raise WorkflowError("No audio data provided to transcription agent")

    model = step.config.model
    await ctx.host.load_model(model, on_progress=ctx.on_model_progress)
    text = await ctx.host.transcribe(clip, model)
    return StepResult(output=text, log=f"Audio transcribed successfully using {model}")


async def speech_synthesis(
    step: BaseStep, upstream: Any, ctx: ExecutionContext
) -> StepResult:
    if not ctx.host.supports(SPEECH_SYNTHESIS):
        raise UnsupportedCapabilityError(
            SPEECH_SYNTHESIS,
            f"Text-to-speech models are not supported in the {ctx.host.name} host. "
            "Use a host with speech synthesis support instead.",
        )
    if not upstream:
        raise WorkflowError("No text input provided to TTS agent")

    model = step.config.model
    await ctx.host.load_model(model, on_progress=ctx.on_model_progress)
    audio = await ctx.host.synthesize(str(upstream), model, step.config.voice)
    clip = AudioClip(data=audio, filename=f"{step.id}.wav", mime_type="audio/wav")
    return StepResult(
        output=clip, log=f"Text-to-speech generated successfully using {model}"
    )
