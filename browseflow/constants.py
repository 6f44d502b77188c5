"""Default values shared across browseflow."""

DEFAULT_CONTEXT_WINDOW = 4096
DEFAULT_CHARS_PER_INPUT_TOKEN = 4
DEFAULT_CHARS_PER_OUTPUT_TOKEN = 3
DEFAULT_OVERHEAD_TOKENS = 100
DEFAULT_MIN_PROMPT_CHARS = 1000
TRUNCATION_NOTE = "\n[Note: Input was truncated due to length constraints]\n"

DEFAULT_GENERATION_MODEL = "llama-3.2-1b-instruct"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048
SCHEMA_INSTRUCTION = "You MUST format your response according to this JSON schema:"

DEFAULT_TRANSCRIPTION_MODEL = "whisper-tiny-en"
DEFAULT_SPEECH_MODEL = "kokoro-tts"
DEFAULT_SPEECH_VOICE = "af_bella"
DEFAULT_CAPTURE_SECONDS = 5.0

INPUT_KEY = "input"
OUTPUT_KEY = "output"
