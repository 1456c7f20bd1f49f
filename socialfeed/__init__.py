"""Session-authenticated social feed backend: posts, likes, comments and direct messages."""
