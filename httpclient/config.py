from dataclasses import dataclass


DEFAULT_USER_AGENT = "httpclient/0.1 (+https://example.com; contact: httpclient@example.com)"


@dataclass(frozen=True)
class ClientConfig:
    user_agent: str = DEFAULT_USER_AGENT
    connect_timeout: float = 5.0
    read_timeout: float = 15.0
    max_connections: int = 16
    workers: int = 8
    max_redirects: int = 5
