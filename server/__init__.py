# =============================================================================
# Camera Vision Analyzer - Relay Server Package
# =============================================================================
# This package contains the server-side components responsible for receiving
# captured frames, building the instruction prompt, calling the hosted
# vision model, and normalizing its reply into two text fields.
# =============================================================================
