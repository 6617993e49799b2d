"""Document Storage — PDFs on local disk, one directory per tenant.

Invariants:
    - Files live at <base_dir>/<company_id>/<stem>_<unix ms>.pdf; the extension
      never comes from the client
    - Resolved paths never escape the tenant directory
    - OSErrors surface as StorageError with a generic message (paths go to the
      log only); delete of a missing file returns False
"""

import logging
import re
import time
from pathlib import Path

from trialengage.core.errors import StorageError, UploadRejectedError

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")
STORED_SUFFIX = ".pdf"


def safe_stem(original_name: str) -> str:
    stem = Path(original_name or "document.pdf").stem
    cleaned = _UNSAFE.sub("_", stem).strip("._")
    return cleaned or "document"


class DocumentStorage:
    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def _tenant_dir(self, company_id: str) -> Path:
        return (self.base_dir / safe_stem(company_id)).resolve()

    def path_for(self, company_id: str, filename: str) -> Path:
        tenant_dir = self._tenant_dir(company_id)
        path = (tenant_dir / filename).resolve()
        try:
            path.relative_to(tenant_dir)
        except ValueError:
            raise UploadRejectedError("Invalid file path")
        return path

    def save(self, company_id: str, original_name: str, data: bytes) -> str:
        """Write bytes and return the stored filename."""
        filename = f"{safe_stem(original_name)}_{int(time.time() * 1000)}{STORED_SUFFIX}"
        path = self.path_for(company_id, filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to store {path}: {e}", extra={"company_id": company_id})
            raise StorageError("could not save document", "write")
        return filename

    def delete(self, company_id: str, filename: str) -> bool:
        path = self.path_for(company_id, filename)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}", extra={"company_id": company_id})
            raise StorageError("could not delete document", "delete")
        return True

    def exists(self, company_id: str, filename: str) -> bool:
        return self.path_for(company_id, filename).is_file()
