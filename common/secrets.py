import os
import json
import boto3

_secrets_cache = {}


def _get_client():
    env = os.environ.get("ENV", "local")
    region = os.environ.get("AWS_REGION", os.environ.get("AWS_DEFAULT_REGION", "us-east-1"))
    if env == "local":
        # Inside a LocalStack Lambda container, LOCALSTACK_HOSTNAME points
        # to the LocalStack gateway. Fall back to localhost for direct use.
        ls_host = os.environ.get("LOCALSTACK_HOSTNAME", "localhost")
        return boto3.client(
            "secretsmanager",
            endpoint_url=f"http://{ls_host}:4566",
            region_name=region,
            aws_access_key_id="test",
            aws_secret_access_key="test",
        )
    return boto3.client("secretsmanager", region_name=region)


def get_secret(secret_name: str) -> dict:
    """Retrieve and cache a secret from AWS Secrets Manager.

    JSON secrets are returned as dicts. A plain-text secret is taken to be a
    database connection string and wrapped as ``{"connection_string": ...}``.
    """
    if secret_name in _secrets_cache:
        return _secrets_cache[secret_name]

    client = _get_client()
    response = client.get_secret_value(SecretId=secret_name)
    raw = response["SecretString"]
    try:
        secret = json.loads(raw)
    except json.JSONDecodeError:
        secret = {"connection_string": raw}
    if not isinstance(secret, dict):
        secret = {"connection_string": raw}
    _secrets_cache[secret_name] = secret
    return secret


def clear_cache():
    _secrets_cache.clear()
