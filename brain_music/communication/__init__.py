"""
Communication interfaces

This module handles external communication, sending voice events to a synthesizer over UDP.
"""

from .note_sender import NoteEventSender

__all__ = ['NoteEventSender']
