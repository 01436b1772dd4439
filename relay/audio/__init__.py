"""Audio ingestion and format conversion."""

from relay.audio.ingest import TemporaryArtifacts, remove_quietly, store_upload
from relay.audio.transcode import to_compact_mono_16k_mp3

__all__ = [
    "TemporaryArtifacts",
    "remove_quietly",
    "store_upload",
    "to_compact_mono_16k_mp3",
]
