HEVC_CODEC_NAME = "hevc"
HEVC_MARKER = "265"


def should_transcode(codec_name: str) -> bool:
    """Return False for video already in the HEVC family, True otherwise.

    Only the codec name is inspected. Matching is case-sensitive: names
    containing "265" or equal to "hevc" are skipped.
    """
    if HEVC_MARKER in codec_name or codec_name == HEVC_CODEC_NAME:
        return False
    return True
