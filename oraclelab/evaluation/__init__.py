from .roundtrip import RoundtripFailure, RoundtripResult, run_mode_roundtrip_tests, run_roundtrip_tests

__all__ = ["RoundtripFailure", "RoundtripResult", "run_mode_roundtrip_tests", "run_roundtrip_tests"]
