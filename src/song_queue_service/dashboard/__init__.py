"""Terminal dashboard for the song queue host."""
