"""``create-lambda-app``: AWS Lambda Go project generator."""
