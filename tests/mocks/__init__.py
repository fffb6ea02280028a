"""In-memory fakes of the external collaborators."""

VIEWER = "0x" + "a" * 40
STREAMER = "0x" + "b" * 40
STREAM_ID = "S1"
