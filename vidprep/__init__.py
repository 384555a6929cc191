"""Video dataset preparation tool: scrub a video and save chosen frames."""

__version__ = "0.1.0"
