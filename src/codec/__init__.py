"""Entity codecs: encode / decode flat record lists to JSON or CSV bytes."""
