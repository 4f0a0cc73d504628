"""SIP/SWP projection engine and its JSON API."""
