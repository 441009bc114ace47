"""
Task subsystem.

Components:
- task_models.py: TaskNode, ids and timestamps
- task_input.py: "#tag" parsing of free-text input
- task_tree.py: pure id-addressed tree operations + tag index
- task_query.py: filter -> sort -> group view pipeline
- autocomplete.py: tag completion for the token under the cursor
- task_store.py: JSON codec and file-backed blob store
- tracker.py: the stateful owner of the current tree
"""
