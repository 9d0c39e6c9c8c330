"""Instruction text for the analysis and upgrade requests."""

ANALYSIS_SYSTEM_PROMPT = """\
You are an expert prompt engineer who evaluates AI prompts. Analyze the \
provided prompt and respond with a single JSON object following the \
requested schema exactly. Do not include any text outside the JSON object.
"""

UPGRADE_SYSTEM_PROMPT = """\
You are an expert AI prompt engineer. Rewrite prompts according to the \
instructions you are given and reply with only the upgraded prompt text.
"""

ANALYSIS_TEMPLATE = """\
Analyze this AI prompt comprehensively and provide detailed metrics:

PROMPT TO ANALYZE:
"{prompt}"

Please provide a detailed analysis in JSON format with the following structure:
{{
  "clarity": number (1-10),
  "specificity": number (1-10),
  "effectiveness": number (1-10),
  "creativity": number (1-10),
  "structure": number (1-10),
  "coherence": number (1-10),
  "readability": number (1-10),
  "languageQuality": number (1-10),
  "contextualRichness": number (1-10),
  "tokenCount": {token_count},
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"],
  "suggestions": ["suggestion1", "suggestion2"],
  "estimatedPerformance": "poor|fair|good|excellent",
  "complexity": "low|medium|high|very-high"
}}

Focus on:
- How clear and unambiguous the prompt is
- How specific and detailed the instructions are
- Creative potential and flexibility
- Structural organization and flow
- Language quality and readability
- Context richness and completeness
- Potential for generating high-quality outputs
- Areas for improvement with specific recommendations

Provide only the JSON response, no additional text.
"""

ROLE_PREAMBLE = (
    "You are an expert AI prompt engineer with deep expertise in creating highly "
    "effective, natural-language prompts that generate superior results. Your task "
    "is to completely transform and upgrade the provided prompt into a significantly "
    "more powerful, comprehensive, and effective version."
)

_RULE = "=" * 80

LIST_PREVENTION_BLOCK = f"""\
CRITICAL FORMATTING REQUIREMENT - ABSOLUTELY NO LISTS:
{_RULE}

STRICTLY FORBIDDEN FORMATTING:
Do NOT use numbered lists (1., 2., 3., etc.) anywhere in the upgraded prompt.
Do NOT use bullet points (such as -, *, or •) anywhere in the upgraded prompt.
Do NOT create step-by-step numbered instructions or enumerated steps.
Do NOT organize content into numbered sections or subsections.
Do NOT use any form of enumeration, itemization, or structured lists of any kind.

REQUIRED FORMATTING APPROACH:
Write ONLY in natural, flowing paragraph format using continuous narrative prose. \
Integrate multiple concepts naturally within sentences with transitional phrases \
such as "including," "such as," "additionally," "furthermore," "in addition to," \
and "while also." Structure information through paragraph breaks, not lists.

FORMATTING EXAMPLES:

WRONG (DO NOT DO THIS):
"Please follow these steps:
1. Analyze the requirements
2. Design the solution
3. Implement the code
4. Test thoroughly"

CORRECT (DO THIS INSTEAD):
"Begin by thoroughly analyzing the requirements to understand the scope and \
objectives, then proceed to design a comprehensive solution that addresses all \
specified needs, followed by implementing clean, well-documented code while \
ensuring robust testing throughout the development process."

WRONG (DO NOT DO THIS):
"Consider the following factors:
- Performance optimization
- Security measures
- User experience
- Maintainability"

CORRECT (DO THIS INSTEAD):
"When developing your solution, carefully consider performance optimization to \
ensure efficient execution, while implementing comprehensive security measures to \
protect against vulnerabilities, all while maintaining an excellent user experience \
and ensuring the code remains maintainable for future development."

{_RULE}
THIS IS ABSOLUTELY CRITICAL - THE UPGRADED PROMPT MUST BE WRITTEN AS FLOWING, \
NATURAL TEXT WITHOUT ANY LISTS, NUMBERS, OR BULLET POINTS WHATSOEVER.
{_RULE}"""

MARKDOWN_GUIDANCE = """\
MARKDOWN FORMATTING REQUIREMENTS:
- Use proper markdown syntax for formatting (headers, code blocks, emphasis)
- Structure the prompt with clear sections using headers (##, ###)
- {list_rule}
- Format code examples with fenced code blocks (```)
- Use emphasis (*italics*, **bold**) for important points
- Include horizontal rules (---) to separate major sections"""

MARKDOWN_LISTS_ALLOWED = "Use bullet points and numbered lists where appropriate"
MARKDOWN_LISTS_FORBIDDEN = (
    "Markdown lists remain forbidden: do NOT use markdown lists (no -, *, or 1. items) "
    "even though headers, code blocks and emphasis are allowed - write in paragraph form instead"
)

PLAIN_TEXT_GUIDANCE = """\
FORMATTING INSTRUCTIONS:
- Use plain text formatting only
- Do NOT use any markdown syntax (no #, *, `, ---, etc.)
- Structure content with clear line breaks and spacing
- Avoid special characters for formatting
- {list_rule}"""

PLAIN_LISTS_ALLOWED = "Use clear structure with appropriate spacing"
PLAIN_LISTS_FORBIDDEN = "Write in flowing paragraph format without any lists or enumeration"

FINAL_INSTRUCTIONS = """\
COMPREHENSIVE UPGRADE INSTRUCTIONS:

Transform the original prompt by completely rewriting it to address every \
identified weakness while implementing all specified enhancements and quality \
improvements. Follow the upgrade specifications precisely to create a prompt that \
is significantly more powerful, effective, and comprehensive than the original.

Ensure the upgraded prompt maintains the original intent while dramatically \
improving its effectiveness through enhanced clarity, specificity, and \
actionability.

{formatting_sentence}

{structure_sentence}

Include clear, specific instructions for the AI on how to respond, add appropriate \
context and background information, and ensure the prompt will generate \
consistent, high-quality results that meet the specified requirements.

FINAL REQUIREMENTS:
- The upgraded prompt must be significantly better than the original
- Address each weakness identified in the analysis
- Incorporate all specified enhancements naturally and seamlessly
- Maintain clarity while adding depth and specificity
- Ensure the prompt is actionable and produces measurable results
- Create a cohesive, professional prompt that flows naturally{extra_requirement}

Provide ONLY the upgraded prompt text with no additional commentary, explanation, \
or meta-text. The response should be the complete, ready-to-use upgraded prompt."""

MARKDOWN_SENTENCE = "Use proper markdown formatting throughout to enhance readability and structure."
PLAIN_SENTENCE = "Use plain text formatting only with no markdown syntax."

PROSE_STRUCTURE_SENTENCE = (
    "CRITICAL: Write the upgraded prompt as flowing, natural text using paragraph "
    "format. Do not use any numbered lists, bullet points, or enumerated steps. "
    "Instead, integrate all instructions and requirements naturally within "
    "well-structured paragraphs that read like continuous, coherent prose."
)
FORMAT_STRUCTURE_SENTENCE = "Structure the content appropriately using the specified output format."
PROSE_REQUIREMENT = (
    "\n- Write as flowing, natural text without any numbered points, bullet points, "
    "or list structures"
)

NO_ENHANCEMENTS = "Focus on core improvements"
NO_QUALITY_IMPROVEMENTS = "Enhance overall quality and effectiveness"
NO_WEAKNESSES = "No specific weaknesses were identified; strengthen the prompt overall"
