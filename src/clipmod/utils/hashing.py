import hashlib
from datetime import datetime


def content_hash(content: str, timestamp: datetime) -> str:
    """Identity of a clipboard entry: sha256 over the text followed by its epoch seconds."""
    hash_input = content + str(timestamp.timestamp())
    return hashlib.sha256(hash_input.encode("utf-8", errors="surrogatepass")).hexdigest()
