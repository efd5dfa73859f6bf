from .playwright_capture import PlaywrightCaptureService, parse_cookie, protocolify

__all__ = ["PlaywrightCaptureService", "parse_cookie", "protocolify"]
