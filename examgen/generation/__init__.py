"""
Question Generation Pipeline
examgen/generation/

Steps:
1. Prompt Builder     : notes + count/difficulty/topic/types -> one prompt
2. Gemini Client      : OpenAI-compatible chat completion, one model at a time
3. Model Fallback     : walk the candidate model list until one returns a JSON array
4. JSON Extractor     : strip code fences / prose, cut out the balanced JSON structure
5. Normalizer         : provider dicts -> CanonicalQuestion (all-or-nothing)
6. Display Adapter    : stored questions -> {question, type, options[]} for the frontend
"""
