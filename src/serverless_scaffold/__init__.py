"""Project scaffolding CLIs for serverless services.

Two generators share one render pipeline:

* ``create-worker-app`` -- Cloudflare Worker (Hono.js) service skeletons.
* ``create-lambda-app`` -- AWS Lambda Go projects in Clean, Simple or DDD
  layout, deployable with SAM, CDK, Serverless Framework or Terraform.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
