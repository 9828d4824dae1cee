from timedshortener.services.code_allocator import CodeAllocator
from timedshortener.services.resolver import Resolver
from timedshortener.services.rate_limiter import RateLimiter, RateDecision


__all__ = [
    'CodeAllocator',
    'Resolver',
    'RateLimiter',
    'RateDecision',
]
