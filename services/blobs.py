import logging
import uuid
from pydantic import BaseModel
from config import config
from services.errors import ValidationError

logger = logging.getLogger(__name__)

IMAGE_KEY_PREFIX = "img"

# --- Valkey/Redis Backend Implementations ---

class _MemoryBlobBackend:
    """Simulates the low-level Valkey/Redis client (in-memory). TTL is ignored."""
    def __init__(self):
        self._blobs: dict[str, dict[str, bytes]] = {}

    def get(self, key: str) -> dict[str, bytes] | None:
        logger.debug("blob memory get: %s", key)
        return self._blobs.get(key)

    def set(self, key: str, fields: dict[str, bytes], ex: int | None = None):
        logger.debug("blob memory set: %s", key)
        self._blobs[key] = dict(fields)


class ValkeyBlobBackend:
    """Blob backend on redis-py (compatible with Valkey). Each blob is a hash of data + content_type."""
    def __init__(self, host: str, port: int, db: int = 0, password: str | None = None):
        import redis

        try:
            # Raw bytes in and out, images are not valid utf-8
            self.client = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=False,
                socket_timeout=2.0
            )
            self.client.ping()
        except Exception as e:
            logger.error("Failed to connect to Valkey/Redis: %s", e)
            raise

    def get(self, key: str) -> dict[str, bytes] | None:
        logger.debug("blob valkey get: %s", key)
        fields = self.client.hgetall(key)
        if not fields:
            return None
        return {k.decode(): v for k, v in fields.items()}

    def set(self, key: str, fields: dict[str, bytes], ex: int | None = None):
        logger.debug("blob valkey set: %s", key)
        pipe = self.client.pipeline()
        pipe.hset(key, mapping=fields)
        if ex:
            pipe.expire(key, ex)
        pipe.execute()


class Blob(BaseModel):
    data: bytes
    content_type: str


# --- Dedicated Blob Store Class ---

class BlobStore:
    """Stores uploaded images by opaque key."""

    def __init__(self, backend, max_bytes: int = config.max_upload_bytes, ttl: int = config.image_ttl_seconds):
        self.backend = backend
        self.max_bytes = max_bytes
        self.ttl = ttl or None
        logger.debug("BlobStore backend: %s", self.backend)

    @staticmethod
    def _key(key: str) -> str:
        return f"{IMAGE_KEY_PREFIX}:{key}"

    def check_size(self, size: int):
        """Raise once an upload of size bytes would be over the cap."""
        if size > self.max_bytes:
            raise ValidationError(f"Upload exceeds {self.max_bytes} bytes")

    def put(self, data: bytes, content_type: str | None) -> str:
        content_type = (content_type or "").split(";")[0].strip().lower()
        if not content_type.startswith("image/"):
            raise ValidationError("Only image uploads are accepted")
        if not data:
            raise ValidationError("Upload body is empty")
        self.check_size(len(data))

        key = uuid.uuid4().hex
        self.backend.set(self._key(key), {"data": data, "content_type": content_type.encode()}, ex=self.ttl)
        logger.info("stored image %s (%s, %d bytes)", key, content_type, len(data))
        return key

    def get(self, key: str) -> Blob | None:
        fields = self.backend.get(self._key(key))
        if not fields:
            return None
        return Blob(data=fields["data"], content_type=fields["content_type"].decode())


# --- Initialize Backend and Default Store ---
valkey_host = config.valkey_host
valkey_port = config.valkey_port

if valkey_host:
    try:
        BLOB_BACKEND = ValkeyBlobBackend(host=valkey_host, port=valkey_port)
        logger.info("blob storage on valkey %s:%d", valkey_host, valkey_port)
    except Exception:
        logger.warning("Falling back to in-memory blob storage, valkey %s:%d unreachable.", valkey_host, valkey_port)
        BLOB_BACKEND = _MemoryBlobBackend()
else:
    logger.info("VALKEY_HOST not set. Using in-memory blob storage.")
    BLOB_BACKEND = _MemoryBlobBackend()

_DEFAULT_BLOB_STORE = BlobStore(backend=BLOB_BACKEND)


def get_blob_store():
    return _DEFAULT_BLOB_STORE


def get_memory_blob_store():
    return BlobStore(backend=_MemoryBlobBackend())
