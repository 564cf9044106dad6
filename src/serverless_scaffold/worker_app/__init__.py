"""``create-worker-app``: Cloudflare Worker (Hono.js) project generator."""
