"""
Room generation pipeline.
"""

from .room_generator import RoomGenerator

__all__ = ['RoomGenerator']
