"""S3 object storage for PDFs and visit photos."""

import asyncio
from urllib.parse import quote

import boto3
from botocore.exceptions import ClientError

from agrostudy.config import Settings, get_settings
from agrostudy.errors import GatewayError


class S3ObjectStorage:
    """
    Object storage on AWS S3 (or MinIO / LocalStack).

    Logical buckets ("pdf-documents", "visit-photos") become key prefixes
    inside the single configured S3 bucket.
    """

    def __init__(self, settings: Settings | None = None):
        """Initialize S3 client with credentials from settings."""
        settings = settings or get_settings()
        client_kwargs = {
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
            "region_name": settings.aws_s3_region,
        }
        # Support MinIO / LocalStack by pointing to a custom endpoint
        if settings.aws_s3_endpoint_url:
            client_kwargs["endpoint_url"] = settings.aws_s3_endpoint_url

        self.s3_client = boto3.client("s3", **client_kwargs)
        self.bucket = settings.aws_s3_bucket
        self.region = settings.aws_s3_region
        self.public_base_url = settings.storage_public_base_url

    @staticmethod
    def _key(bucket: str, path: str) -> str:
        return f"{bucket}/{path.lstrip('/')}"

    async def upload_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        """
        Upload an object.

        Raises:
            GatewayError: If S3 operation fails
        """
        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket,
                Key=self._key(bucket, path),
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            raise GatewayError(f"Failed to upload object to S3: {str(e)}") from e

    async def delete_object(self, bucket: str, path: str) -> None:
        """
        Delete an object.

        Raises:
            GatewayError: If S3 operation fails
        """
        try:
            await asyncio.to_thread(
                self.s3_client.delete_object,
                Bucket=self.bucket,
                Key=self._key(bucket, path),
            )
        except ClientError as e:
            raise GatewayError(f"Failed to delete object from S3: {str(e)}") from e

    def get_public_url(self, bucket: str, path: str) -> str:
        """Public URL of an object (CDN base URL if configured, else the S3 virtual-hosted URL)."""
        key = quote(self._key(bucket, path))
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
