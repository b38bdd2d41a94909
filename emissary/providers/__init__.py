"""Model providers: chat completion gateway and embeddings."""
