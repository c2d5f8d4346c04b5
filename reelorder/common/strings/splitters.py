from typing import List

def csv_to_list(v: str | List[str] | None) -> List[str]:
    if v is None:
        return []
    if isinstance(v, list):
        return [s.strip() for s in v if s and str(s).strip()]
    return [s.strip() for s in str(v).split(",") if s.strip()]


def normalize_exts(v: str | List[str] | None) -> List[str]:
    """Lowercase extensions without the leading dot: ".MP4, mkv" -> ["mp4", "mkv"]."""
    return [s.lower().lstrip(".") for s in csv_to_list(v) if s.lstrip(".")]
