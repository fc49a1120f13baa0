"""Runtime components: context, hooks, tools, skills, agent and task stores.

Import from the submodules (or from ``skill_engine``) directly.
"""
