"""
Core of the console app.

Components:
- ports.py: Protocols / aliases the api and tasks layers depend on
- board.py: category list + memo editor interaction model over task controllers
- state.py: AppState (settings, token store, api client, board)
"""
