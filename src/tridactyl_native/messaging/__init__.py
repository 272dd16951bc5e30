"""Messaging subsystem: wire framing, dispatch, and the stdio loop."""

from tridactyl_native.messaging.protocol import Code as Code
from tridactyl_native.messaging.protocol import Response as Response
from tridactyl_native.messaging.protocol import read_message as read_message
from tridactyl_native.messaging.protocol import write_message as write_message
