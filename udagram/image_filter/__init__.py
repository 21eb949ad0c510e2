"""Image filter service: download a remote image and return a greyscale thumbnail."""
