"""
Remote model adapters.

Exports:
  - VisionClient: multimodal page analysis over chat completions
  - SynthesisClient: structured extraction over a LangChain chat model
"""

from flashai.boundary.ai.synthesis_client import SynthesisClient, extract_json
from flashai.boundary.ai.vision_client import VisionClient, classify_status

__all__ = ["SynthesisClient", "VisionClient", "classify_status", "extract_json"]
