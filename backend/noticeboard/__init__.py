"""NoticeBoard backend: bulletin board API with stateless JWT authentication."""

__version__ = "1.0.0"
