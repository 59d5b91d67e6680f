"""Configuration file readers, validation expressions and key-path storage."""