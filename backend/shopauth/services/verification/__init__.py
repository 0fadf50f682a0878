from .manager import IssuedCode, VerificationCodeManager, hash_token

__all__ = ["IssuedCode", "VerificationCodeManager", "hash_token"]
