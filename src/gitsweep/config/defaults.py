"""Embedded default rule-set and the starter .gitsweep.toml template."""

DEFAULT_TOML = """\
title = "gitsweep default config"

[[rules]]
id = "aws-access-key"
description = "AWS Access Key"
regex = '''(A3T[A-Z0-9]|AKIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA|ASIA)[A-Z0-9]{16}'''
keywords = ["akia", "agpa", "aida", "aroa", "aipa", "anpa", "anva", "asia", "a3t"]
tags = ["key", "AWS"]

[[rules]]
id = "aws-secret-key"
description = "AWS Secret Key"
regex = '''(?i)aws(.{0,20})?(?-i:['\\"][0-9a-zA-Z/+]{40}['\\"])'''
keywords = ["aws"]
tags = ["key", "AWS"]

[[rules]]
id = "aws-mws-key"
description = "AWS MWS key"
regex = '''amzn\\.mws\\.[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}'''
keywords = ["amzn"]
tags = ["key", "AWS", "MWS"]

[[rules]]
id = "github-pat"
description = "Github Personal Access Token"
regex = '''ghp_[0-9a-zA-Z]{36}'''
keywords = ["ghp_"]
tags = ["key", "Github"]

[[rules]]
id = "github-oauth"
description = "Github OAuth Access Token"
regex = '''gho_[0-9a-zA-Z]{36}'''
keywords = ["gho_"]
tags = ["key", "Github"]

[[rules]]
id = "github-app-token"
description = "Github App Token"
regex = '''(ghu|ghs)_[0-9a-zA-Z]{36}'''
keywords = ["ghu_", "ghs_"]
tags = ["key", "Github"]

[[rules]]
id = "github-refresh-token"
description = "Github Refresh Token"
regex = '''ghr_[0-9a-zA-Z]{76}'''
keywords = ["ghr_"]
tags = ["key", "Github"]

[[rules]]
id = "gitlab-pat"
description = "GitLab Personal Access Token"
regex = '''glpat-[0-9a-zA-Z\\-_]{20}'''
keywords = ["glpat-"]
tags = ["key", "GitLab"]

[[rules]]
id = "slack-token"
description = "Slack token"
regex = '''xox[baprs]-([0-9a-zA-Z]{10,48})'''
keywords = ["xoxb", "xoxa", "xoxp", "xoxr", "xoxs"]
tags = ["key", "Slack"]

[[rules]]
id = "slack-webhook"
description = "Slack Webhook"
regex = '''https://hooks\\.slack\\.com/services/T[a-zA-Z0-9_]{8}/B[a-zA-Z0-9_]{8,12}/[a-zA-Z0-9_]{24}'''
keywords = ["hooks.slack.com"]
tags = ["key", "slack"]

[[rules]]
id = "stripe-access-token"
description = "Stripe"
regex = '''(?i)(sk|pk)_(test|live)_[0-9a-z]{10,32}'''
keywords = ["sk_test", "pk_test", "sk_live", "pk_live"]
tags = ["key", "Stripe"]

[[rules]]
id = "private-key"
description = "Asymmetric Private Key"
regex = '''-----BEGIN ((EC|PGP|DSA|RSA|OPENSSH) )?PRIVATE KEY( BLOCK)?-----'''
keywords = ["-----begin"]
tags = ["key", "AsymmetricPrivateKey"]

[[rules]]
id = "jwt"
description = "JSON Web Token"
regex = '''eyJ[A-Za-z0-9_-]{10,}\\.eyJ[A-Za-z0-9_-]{10,}\\.[A-Za-z0-9_-]{10,}'''
keywords = ["eyj"]
tags = ["key", "JWT"]

[[rules]]
id = "google-api-key"
description = "Google API key"
regex = '''AIza[0-9A-Za-z\\-_]{35}'''
keywords = ["aiza"]
tags = ["key", "Google"]

[[rules]]
id = "twilio-api-key"
description = "Twilio API Key"
regex = '''SK[0-9a-fA-F]{32}'''
keywords = ["sk"]
tags = ["key", "twilio"]

[[rules]]
id = "generic-api-key"
description = "Generic API Key"
regex = '''(?i)(api_key|apikey|secret)(.{0,20})?['|"]([0-9a-zA-Z]{32,45})['|"]'''
secretGroup = 3
keywords = ["api_key", "apikey", "secret"]
tags = ["key", "API", "generic"]
  [[rules.entropies]]
  Min = "3.5"
  Max = "7.0"
  Group = "3"
  [rules.allowlist]
  stopwords = ["example", "placeholder"]

[[rules]]
id = "pkcs12-file"
description = "PKCS12 file"
file = '''(?i)\\.(p12|pfx)$'''
tags = ["key", "pkcs12"]

[[rules]]
id = "ssh-private-key-file"
description = "SSH private key file"
file = '''^id_(rsa|dsa|ecdsa|ed25519)$'''
tags = ["key", "ssh"]

[allowlist]
description = "global allow lists"
files = ['''^\\.?gitsweep\\.toml$''', '''(.*?)(jpg|gif|doc|pdf|bin)$''']
paths = ['''(^|/)node_modules(/|$)''', '''(^|/)vendor(/|$)''']
"""

STARTER_TOML = """\
# gitsweep configuration
title = "project rules"

# Pull in the built-in rules; rules declared here win over built-ins
# that share the same id.
[extend]
useDefault = true
# path = "shared/gitsweep.toml"

# [[rules]]
# id = "internal-token"
# description = "Internal service token"
# regex = '''itk_[0-9a-f]{32}'''
# keywords = ["itk_"]
# tags = ["key", "internal"]
#   [[rules.entropies]]
#   Min = "3.0"
#   Max = "4.5"
#   Group = "0"

[allowlist]
description = "project allow list"
# regexes = ['''EXAMPLE''']
# files = ['''\\.lock$''']
# paths = ['''^docs/''']
# commits = ["<full commit sha>"]
# stopwords = ["dummy"]
"""
