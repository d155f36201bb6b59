"""Live preview hand-off"""

from uigen.preview.bridge import DirectoryPreviewSink, HttpPreviewSink, PreviewBridge

__all__ = ["DirectoryPreviewSink", "HttpPreviewSink", "PreviewBridge"]
