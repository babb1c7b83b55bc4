"""
Task subsystem.

Components:
- task_models.py: controller state + terminal phases of a resolve() call
- task_controller.py: AsyncTaskController (generation-gated async slot)
- task_api.py: small high-level helpers used by the rest of the app
"""
