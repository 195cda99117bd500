"""Helpers for creating boto3 clients.

Environment Variables:
    AWS_REGION or AWS_DEFAULT_REGION:
        The AWS region to use. Default: "us-east-1"

    AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_SESSION_TOKEN:
        Explicit credentials, used when both the key id and secret are set

    AWS_PROFILE:
        AWS credential profile to use

Authentication Methods (in order of precedence):
    1. AWS profile: If a profile is given or AWS_PROFILE is set
    2. Explicit credentials: If an access key id and secret access key are provided
    3. Default credential chain: Environment variables, ~/.aws/credentials,
       IAM roles, etc.
"""

import logging
import os
from typing import Any, Dict, Optional

import boto3

logger = logging.getLogger("bda-mcp.utils.aws")


def get_env_region() -> str:
    """Get AWS region from environment variables."""
    return os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1"))


def get_env_credentials() -> Dict[str, Optional[str]]:
    """Get AWS credentials from environment variables."""
    return {
        "aws_access_key_id": os.getenv("AWS_ACCESS_KEY_ID"),
        "aws_secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
        "aws_session_token": os.getenv("AWS_SESSION_TOKEN"),
    }


def create_client(
    service_name: str,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    profile: Optional[str] = None,
    credentials: Optional[Dict[str, Optional[str]]] = None,
) -> Any:
    """Create a boto3 client for an AWS service.

    Args:
        service_name: boto3 service name, e.g. 'athena' or 's3'
        region: Region name, defaults to the environment region
        endpoint_url: Optional endpoint URL for compatible services like MinIO
        profile: Optional credential profile, defaults to AWS_PROFILE
        credentials: Optional explicit credentials, defaults to the environment

    Returns:
        A boto3 client
    """
    client_kwargs: Dict[str, Any] = {"region_name": region or get_env_region()}

    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url

    profile = profile or os.getenv("AWS_PROFILE")
    if profile:
        logger.info(f"Creating {service_name} client using profile: {profile}")
        session = boto3.Session(profile_name=profile)
        return session.client(service_name, **client_kwargs)

    credentials = credentials if credentials is not None else get_env_credentials()
    if credentials.get("aws_access_key_id") and credentials.get("aws_secret_access_key"):
        logger.info(f"Creating {service_name} client using explicit credentials")
        client_kwargs["aws_access_key_id"] = credentials["aws_access_key_id"]
        client_kwargs["aws_secret_access_key"] = credentials["aws_secret_access_key"]
        if credentials.get("aws_session_token"):
            client_kwargs["aws_session_token"] = credentials["aws_session_token"]
    else:
        logger.info(f"Creating {service_name} client using default credential chain")

    return boto3.client(service_name, **client_kwargs)
