from .http import Auth, BearerAuth, HttpClient, HttpError

__all__ = ["Auth", "BearerAuth", "HttpClient", "HttpError"]
