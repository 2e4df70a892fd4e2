"""
Synthesizer communication interface

This module implements the audio sink as UDP JSON messages: every voice start
and stop is sent to an external synthesizer, which does the actual rendering.
"""

import json
import logging
import socket
from typing import Any, Dict

from ..core.data_types import Voice
from ..core.config import MASTER_GAIN, UDP_HOST, UDP_PORT
from ..music.voices import AudioSink


class NoteEventSender(AudioSink):
    """
    Send voice start/stop messages to a synthesizer via UDP

    Gains are multiplied by the master gain before sending.
    """

    def __init__(self, host: str = UDP_HOST, port: int = UDP_PORT, master_gain: float = MASTER_GAIN):
        self.host = host
        self.port = port
        self.master_gain = master_gain
        self.socket = None
        self.sent_count = 0
        self._setup_socket()

    def _setup_socket(self):
        """Setup UDP socket for communication"""
        try:
            self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            logging.info(f"UDP sender initialized: {self.host}:{self.port}")
        except OSError as e:
            logging.error(f"Failed to setup UDP socket: {e}")

    def build_message(self, event: str, voice: Voice) -> Dict[str, Any]:
        """Create the JSON payload for a voice event"""
        return {
            "event": event,
            "slot": voice.handle.slot,
            "cycle": voice.handle.cycle,
            "frequency": float(voice.frequency),
            "waveform": voice.waveform.value,
            "gain": float(voice.gain * self.master_gain),
            "start": float(voice.start_time),
            "stop": float(voice.stop_time),
        }

    def send(self, message: Dict[str, Any]) -> bool:
        """
        Send one message to the synthesizer

        Returns:
            bool: True if sent successfully
        """
        if self.socket is None:
            return False

        try:
            json_str = json.dumps(message)
            self.socket.sendto(json_str.encode('utf-8'), (self.host, self.port))
            self.sent_count += 1
            return True
        except OSError as e:
            logging.error(f"Failed to send UDP message: {e}")
            return False

    def start_voice(self, voice: Voice) -> None:
        self.send(self.build_message("start", voice))

    def stop_voice(self, voice: Voice) -> None:
        self.send(self.build_message("stop", voice))

    def close(self):
        """Close UDP socket"""
        if self.socket:
            self.socket.close()
            self.socket = None
