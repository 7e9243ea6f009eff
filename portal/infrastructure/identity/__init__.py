from portal.infrastructure.identity.local_provider import LocalIdentityProvider

__all__ = ["LocalIdentityProvider"]
