import asyncio
import base64
import os
import sys
import traceback

import requests
from dotenv import load_dotenv

from portal.core.config import Settings
from portal.core.errors import UploadError
from portal.core.logging_config import setup_logging
from portal.schemas.requests import UploadRequest
from portal.services.backup_service import BackupService
from portal.services.upload_service import UploadService

USAGE = "Usage: python cli_upload.py <class> <question|answer> <path>"


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 3:
        print(USAGE)
        return 1

    class_name, upload_type, path = argv[0], argv[1], argv[2]

    load_dotenv()
    settings = Settings()
    setup_logging(settings.LOG_LEVEL)

    print(f"🚀 Uploading {path} to {class_name} as {upload_type}...")

    try:
        with open(path, "rb") as f:
            content = base64.b64encode(f.read()).decode("ascii")

        request = UploadRequest.from_form({
            "class": class_name,
            "filename": os.path.basename(path),
            "content": content,
            "type": upload_type,
        })
        stored = UploadService(settings).upload(request)
    except UploadError as e:
        print(f"❌ Upload failed: {e.message}")
        traceback.print_exc()
        return 1
    except (OSError, requests.RequestException) as e:
        print(f"❌ Upload failed: {e}")
        traceback.print_exc()
        return 1

    print(f"✅ Uploaded: {stored.url}")

    # No response to hand back first, so the backup runs inline
    if request.type == "answer" and settings.GOOGLE_APPS_SCRIPT_URL:
        result = asyncio.run(
            BackupService(settings.GOOGLE_APPS_SCRIPT_URL).backup_answer_key(request.content, request.class_name)
        )
        print("✅ Drive backup complete." if result else "⚠️ Drive backup failed, see log.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
