"""
Positioning state synchronization engine (asyncio, no Qt dependency)
"""
