BASE_URL: str = "http://localhost:11434/api"

# Connect / per-read timeouts in seconds
CONNECT_TIMEOUT: float = 30
READ_TIMEOUT: float = 60

# Bytes requested per read of the streamed response body
STREAM_CHUNK_SIZE: int = 4096

FAILURE_TITLE: str = "Summarize changes failed"
FAILURE_MESSAGE: str = "Please check if Ollama is running well on your local machine."

DEFAULT_PROMPT: str = """
You are an expert software engineer writing a git commit message.

Below are the staged changes of ${TotalFileCount} file(s) as unified diffs:

${UnifiedDiff}

Structure of the methods touched by this change (each method followed by the methods it calls):

${MethodStackSummary}

Write a commit message for these changes:
- The first line is a concise summary in the imperative mood, at most 72 characters.
- Leave one blank line, then explain what changed and why in a few short bullet points.
- Do not describe files that were not changed.
- Output *only* the raw commit message, without any introduction or extra formatting.
"""
