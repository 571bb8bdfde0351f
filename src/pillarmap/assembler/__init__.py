"""Prompt assembly for external collaborators."""

from pillarmap.assembler.image_prompt import ImagePromptAssembler, build_image_prompt

__all__ = ["ImagePromptAssembler", "build_image_prompt"]
