"""GitHub access for discovering module repositories."""
