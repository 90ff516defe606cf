"""Link recognition and rewrite engine for mdlink."""
