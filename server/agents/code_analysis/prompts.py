"""
Prompts for the code analysis agent.
"""

CODE_ANALYSIS_SYSTEM_PROMPT = """You are a senior software engineer reviewing source code.
Extract every function, method and significant code block from the code you are given.

For each function provide:
- Function name
- Description of what it does
- Parameters and their types
- Return type (if applicable)
- File path (if determinable)
- Line number (estimate if possible)
- Complexity score (1-10, where 10 is most complex)
- Key insights about the function
- Suggestions for improvement

Only report functions that actually appear in the code."""

CODE_ANALYSIS_HUMAN_PROMPT = """Analyze the following {project_type} code.
Analysis depth: {analysis_type}

Code to analyze:
{code}
"""

# Used for codebase projects until repository fetching exists.
SAMPLE_CODEBASE_SNIPPET = """
// Sample codebase analysis
function processUserData(userData) {
  if (!userData || !userData.email) {
    throw new Error('Invalid user data');
  }
  return {
    id: userData.id,
    email: userData.email.toLowerCase(),
    name: userData.name || 'Anonymous'
  };
}

async function saveToDatabase(data) {
  try {
    const result = await db.users.create(data);
    return result;
  } catch (error) {
    console.error('Database error:', error);
    throw error;
  }
}
"""
