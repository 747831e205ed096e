PR_QUERY = """
query PullRequestContext($owner: String!, $repo: String!, $number: Int!) {
  rateLimit {
    cost
    remaining
    resetAt
  }
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $number) {
      title
      body
      author {
        login
        ... on User {
          name
        }
      }
      baseRefName
      headRefName
      headRefOid
      createdAt
      additions
      deletions
      state
      commits(first: 100) {
        totalCount
        nodes {
          commit {
            oid
            message
            author {
              name
              email
            }
          }
        }
      }
      files(first: 100) {
        nodes {
          path
          additions
          deletions
          changeType
        }
      }
      comments(first: 100) {
        nodes {
          id
          databaseId
          body
          author {
            login
          }
          createdAt
        }
      }
      reviews(first: 100) {
        nodes {
          id
          databaseId
          author {
            login
          }
          body
          state
          submittedAt
          comments(first: 100) {
            nodes {
              id
              databaseId
              body
              path
              line
              originalLine
              author {
                login
              }
              createdAt
            }
          }
        }
      }
    }
  }
}
"""

ISSUE_QUERY = """
query IssueContext($owner: String!, $repo: String!, $number: Int!) {
  rateLimit {
    cost
    remaining
    resetAt
  }
  repository(owner: $owner, name: $repo) {
    issue(number: $number) {
      title
      body
      author {
        login
        ... on User {
          name
        }
      }
      createdAt
      state
      comments(first: 100) {
        nodes {
          id
          databaseId
          body
          author {
            login
          }
          createdAt
        }
      }
    }
  }
}
"""

USER_QUERY = """
query UserDisplayName($login: String!) {
  user(login: $login) {
    name
  }
}
"""
