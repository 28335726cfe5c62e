# =============================================================================
# Camera Vision Analyzer - Analyzer Client Package
# =============================================================================
# This package contains the camera-side components: the camera session state
# machine, frame capture and downscaling, the relay HTTP client, result
# display and speech playback.
# =============================================================================
