"""AddTranscriptUseCase - stores an external transcription result as a text set.

The speech-to-text request itself happens outside this service; callers hand
over the transcript text together with the upload's filename and request
parameters so the text set gets a descriptive name.
"""

import logging
from dataclasses import dataclass

from domain.models import TextSet, TextSource
from stores.groups import GroupStore

logger = logging.getLogger(__name__)

# Longer parameter strings are summarized as "+ params"
MAX_PARAM_PREVIEW = 20


def transcription_name(filename: str, parameters: str = "", streaming: bool = True) -> str:
    """Build a text set name such as "call.wav (Streaming: punctuate=true...)"."""
    mode = "Streaming" if streaming else "Batch"
    parameters = parameters.strip()
    if not parameters:
        return f"{filename} ({mode})"
    if len(parameters) > MAX_PARAM_PREVIEW:
        return f"{filename} ({mode} + params)"
    return f"{filename} ({mode}: {parameters}...)"


@dataclass
class TranscriptResult:
    """A finished transcription waiting to be added to a group."""
    group_id: str
    filename: str
    content: str
    parameters: str = ""
    streaming: bool = True


class AddTranscriptUseCase:
    def __init__(self, store: GroupStore):
        self._store = store

    def execute(self, result: TranscriptResult) -> TextSet:
        """Raises GroupNotFound when result.group_id does not name a group."""
        name = transcription_name(result.filename, result.parameters, result.streaming)
        ts = self._store.produce_text_set(
            result.group_id, result.content.strip(), source=TextSource.TRANSCRIBED, name=name,
        )
        logger.info(f"Added transcript {ts.id} to group {result.group_id}: {name}")
        return ts
