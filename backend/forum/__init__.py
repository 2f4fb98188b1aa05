"""Q&A forum backend: questions, answers, comments, votes, mentions and notifications."""
