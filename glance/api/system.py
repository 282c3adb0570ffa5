"""
Configuration check endpoint
Reports which integrations are configured, never their values
"""

from fastapi import APIRouter

from glance.config import settings

router = APIRouter(tags=["system"])


@router.get("/check-env")
async def check_env():
    """Presence flags for the environment the service needs"""
    return {
        "hasOpenAIKey": bool(settings.OPENAI_API_KEY),
        "hasClerkJwksUrl": bool(settings.CLERK_JWKS_URL),
        "hasClerkSecretKey": bool(settings.CLERK_SECRET_KEY),
        "hasS3Bucket": bool(settings.S3_BUCKET_NAME),
        "hasS3Credentials": bool(settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY),
        "hasDatabaseUrl": bool(settings.DATABASE_URL),
        "hasVectorDb": bool(settings.VECTOR_DB_HOST),
        "vectorIndexName": settings.VECTOR_INDEX_NAME,
    }
