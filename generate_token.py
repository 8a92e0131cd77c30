"""Print a bearer token for calling the Cart Service locally.

Usage: python generate_token.py [user_id]
"""

import sys

from services.cart_service.auth import generate_token
from services.cart_service.main import Settings

user_id = sys.argv[1] if len(sys.argv) > 1 else "user123"
settings = Settings()

try:
    token = generate_token(user_id, settings.jwt_secret, settings.jwt_algorithm)
except Exception as e:
    print(f"❌ Failed to generate token: {e}")
    sys.exit(1)

if not settings.jwt_secret:
    print("⚠️  JWT_SECRET not set, signing with the development secret")

print(f"👤 User: {user_id}")
print(f"🔑 Token: {token}")
print("\nUse it in the Authorization header:")
print(f"Authorization: Bearer {token}\n")
print("curl -X GET http://localhost:8001/api/cart \\")
print(f'  -H "Authorization: Bearer {token}"')
