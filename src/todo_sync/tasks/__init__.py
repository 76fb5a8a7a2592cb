"""
Task subsystem.

Components:
- task_models.py: data structures (Task, FilterCriterion, actions, Stats)
- task_store.py: canonical in-memory collection + the shared action reducer
- task_overlay.py: optimistic overlay replayed over the canonical base
- task_views.py: filtering, stats and identity-keyed memoization
- task_scheduler.py: priority job queue that defers filter recomputation
- task_engine.py: public surface used by presentation
- task_api.py: small high-level helpers used by the console front-end
"""
