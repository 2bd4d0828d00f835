"""
Core domain logic.

Contains:
- pipeline/: Chunking, dispatch, response repair, combination and progress
- model_tasks/: Model client and the per-task prompts and result handling
- exceptions: Error hierarchy shared across layers
"""
