import os

import boto3
from botocore.exceptions import ClientError

AWS_DEFAULT_REGION = os.getenv("AWS_DEFAULT_REGION", "us-east-1")


class SecretLookupError(Exception):
    pass


def get_secret(secret_name):
    """
    Fetch a secret string (or binary) from AWS Secrets Manager.

    Used by the production settings for the database password and the
    media upload token.
    """
    endpoint_url = "https://secretsmanager.%s.amazonaws.com" % AWS_DEFAULT_REGION

    session = boto3.session.Session()
    client = session.client(
        service_name="secretsmanager",
        region_name=AWS_DEFAULT_REGION,
        endpoint_url=endpoint_url,
    )

    try:
        response = client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        code = e.response["Error"]["Code"]
        if code == "ResourceNotFoundException":
            raise SecretLookupError(
                "The requested secret %s was not found" % secret_name
            ) from e
        raise SecretLookupError(
            "Unable to read secret %s: %s" % (secret_name, code)
        ) from e

    if "SecretString" in response:
        return response["SecretString"]
    return response["SecretBinary"]
