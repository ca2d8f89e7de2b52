import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from codetasks.errors import FileStoreError

logger = logging.getLogger(__name__)


class S3FileStore:
    """Deletes task attachments from an S3 bucket."""

    def __init__(self, bucket, client=None, region=None):
        self.bucket = bucket
        self._client = client or boto3.client("s3", region_name=region)

    def delete_files(self, files):
        keys = [f["key"] for f in files]
        if not keys:
            return
        try:
            resp = self._client.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Deleting %d object(s) from %s failed: %s", len(keys), self.bucket, exc)
            raise FileStoreError() from exc

        errors = resp.get("Errors") or []
        if errors:
            failed = ", ".join(e.get("Key", "?") for e in errors)
            logger.error("S3 refused to delete keys from %s: %s", self.bucket, failed)
            raise FileStoreError()
        logger.info("Deleted %d object(s) from %s", len(keys), self.bucket)


class NullFileStore:
    """Used when no bucket is configured; attachments are left in place."""

    def delete_files(self, files):
        if files:
            logger.warning("No file bucket configured; skipping delete of %d file(s)", len(files))


def create_file_store(config):
    bucket = config.get("AWS_S3_BUCKET")
    if not bucket:
        return NullFileStore()
    return S3FileStore(bucket, region=config.get("AWS_REGION"))
