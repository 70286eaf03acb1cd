"""Task records shown on the kanban board.

The board columns are the task statuses; ``is_task_status`` is the column
predicate the board engine uses to resolve drop targets.
"""
