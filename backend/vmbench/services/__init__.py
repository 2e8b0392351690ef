from .profiler_run import Phase, ProfilerRun, RunMode
from .share import decode_payload, encode_payload, parse_location_hash, share_link

__all__ = [
    "Phase",
    "ProfilerRun",
    "RunMode",
    "decode_payload",
    "encode_payload",
    "parse_location_hash",
    "share_link",
]
