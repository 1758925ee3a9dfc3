"""I/O layer — talk to the hosting provider.

  github   → parse references, build archive URLs
  refs     → list remote refs (git ls-remote), pick a commit
  archive  → download commit archives into the cache
"""
